#!/usr/bin/env python3
from os.path import dirname
from setuptools import setup

with open(dirname(__file__) + "/README.rst", "r") as fd:
    readme = fd.read()

setup(
    name="awssigner",
    version="0.1.0",
    packages=['awssigner'],
    python_requires=">=3.7",
    install_requires=["pytz", "Faker>=4.0"],
    extras_require={
        "test": ["pytest"],
    },

    # PyPI information
    description="AWS SigV4 request signing for load-test harnesses",
    long_description=readme,
    long_description_content_type="text/x-rst",
    license="Apache 2.0",
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    keywords = ['aws', 'signature', 'aws-sigv4', 'load-testing'],
    zip_safe=False,
)
