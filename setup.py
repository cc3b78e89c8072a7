#!/usr/bin/env python

"""The setup script."""

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read()

requirements = ['pyasn1', 'cryptography']

test_requirements = ['pytest>=3', ]

setup(
    name='sm-keys',
    version='0.1.0',
    license="MIT license",
    description="SM2 private/public key PEM and DER encoding, with password encrypted PEM",
    long_description=readme + '\n\n' + history,
    long_description_content_type='text/x-rst',
    install_requires=requirements,
    extras_require={'test': test_requirements},
    include_package_data=True,
    keywords=['sm2', 'gm', 'pem', 'pkcs8', 'asn1'],
    packages=find_packages(include=['sm_keys', 'sm_keys.*']),
    zip_safe=False,
    python_requires='>=3.6',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.6',
        'Programming Language :: Python :: 3.7',
        'Programming Language :: Python :: 3.8',
    ],
)
