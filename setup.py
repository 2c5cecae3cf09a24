import io
import os
from os import path
import re

from setuptools import find_packages
from setuptools import setup

MYDIR = path.abspath(os.path.dirname(__file__))


def load_version():
    filename = path.join(MYDIR, 'envrequest', 'version.py')
    with io.open(filename, encoding='utf-8') as version_file:
        match = re.search(
            r"^__version__ = '([^']+)'", version_file.read(), re.MULTILINE
        )

    assert match is not None, 'could not find __version__ in ' + filename
    return match.group(1)


def load_description():
    with io.open(path.join(MYDIR, 'README.rst'), encoding='utf-8') as readme:
        return readme.read()


setup(
    name='envrequest',
    version=load_version(),
    description=(
        'Normalizes the server variables a web server reports for a request '
        'into a single canonical request object.'
    ),
    long_description=load_description(),
    long_description_content_type='text/x-rst',
    license='Apache-2.0',
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Internet :: WWW/HTTP :: WSGI',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    keywords='wsgi cgi iis apache request uri base-url',
    python_requires='>=3.9',
    packages=find_packages(include=['envrequest', 'envrequest.*']),
    include_package_data=True,
    zip_safe=False,
    install_requires=[],
    extras_require={
        'test': ['pytest'],
    },
)
