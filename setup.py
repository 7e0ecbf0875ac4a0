#!/usr/bin/env python
from setuptools import find_packages, setup

VERSION = __import__("mediahub").get_version()
INSTALL_REQUIREMENTS = [
    "Django>=4.2",
    "requests",
    "Pillow",
    "structlog",
    "django-structlog",
    "django-bootstrap5",
    "sentry-sdk",
]
TEST_REQUIREMENTS = ["pytest", "pytest-django"]
SCRIPTS = ["manage.py"]
DESCRIPTION = "Media library with migration of local media to a DAM"
CLASSIFIERS = """\
Environment :: Web Environment
Framework :: Django
Programming Language :: Python
Programming Language :: Python :: 3
""".splitlines()

with open("README.md", "r") as f:
    LONG_DESCRIPTION = f.read()


setup(
    name="mediahub",
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["examples", "examples.*"]),
    include_package_data=True,
    scripts=SCRIPTS,
    install_requires=INSTALL_REQUIREMENTS,
    extras_require={"test": TEST_REQUIREMENTS},
    classifiers=CLASSIFIERS,
)
