#!/usr/bin/env python

# Todo list to prepare a release:
#  - run the test suite: pytest tests
#  - edit specimen/version.py: check/set version
#  - edit ChangeLog: set release date
#  - git tag specimen-x.y
#  - python -m build && twine upload dist/*
#
# After the release:
#  - edit specimen/version.py: set version to n+1
#  - edit ChangeLog: add a new empty section for version n+1

from importlib.util import module_from_spec, spec_from_file_location
from os import path

from setuptools import setup

CLASSIFIERS = [
    'Intended Audience :: Developers',
    'Development Status :: 4 - Beta',
    'License :: OSI Approved :: GNU General Public License (GPL)',
    'Operating System :: OS Independent',
    'Natural Language :: English',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Topic :: Software Development :: Testing',
]

MODULES = (
    "specimen",
)


def load_version():
    spec = spec_from_file_location("version", path.join("specimen", "version.py"))
    version = module_from_spec(spec)
    spec.loader.exec_module(version)
    return version


def main():
    specimen = load_version()
    PACKAGES = {}
    for name in MODULES:
        PACKAGES[name] = name.replace(".", "/")

    with open('README.rst') as fp:
        long_description = fp.read()
    with open('ChangeLog') as fp:
        long_description += fp.read()

    install_options = {
        "name": specimen.PACKAGE,
        "version": specimen.VERSION,
        "url": specimen.WEBSITE,
        "download_url": specimen.WEBSITE,
        "description": "Synthesize fully populated test fixtures and operation data providers",
        "long_description": long_description,
        "classifiers": CLASSIFIERS,
        "license": specimen.LICENSE,
        "packages": list(PACKAGES.keys()),
        "package_dir": PACKAGES,
        "python_requires": ">=3.11",
        "install_requires": ["python-ptrace>=0.7", "numpy"],
        "extras_require": {"test": ["pytest"]},
    }
    setup(**install_options)

if __name__ == "__main__":
    main()
