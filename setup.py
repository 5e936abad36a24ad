#!/usr/bin/python3 -OO
# Copyright 2007-2024 The SABnzbd-Team (sabnzbd.org)
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; either version 2
# of the License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.

import re

from setuptools import setup

# Load description
with open("README.md", "r") as file_long_description:
    long_description = file_long_description.read()

# Parse the version from the package
with open("src/__init__.py", "r") as init_py:
    version = re.findall('__version__ = "([0-9xA-Z_.]+)"', init_py.read())[0]

setup(
    name="nntpclient",
    version=version,
    author="Safihre",
    author_email="safihre@sabnzbd.org",
    url="https://github.com/sabnzbd/nntpclient/",
    license="GPLv2+",
    packages=["nntpclient"],
    package_dir={"nntpclient": "src"},
    package_data={"nntpclient": ["py.typed"]},
    python_requires=">=3.8",
    install_requires=["chardet"],
    extras_require={"test": ["pytest", "portend"]},
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3 :: Only",
        "License :: OSI Approved :: GNU General Public License v2 or later (GPLv2+)",
        "Operating System :: OS Independent",
        "Development Status :: 5 - Production/Stable",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Communications :: Usenet News",
    ],
    description="NNTP (RFC 3977) client with streaming article bodies",
    long_description=long_description,
    long_description_content_type="text/markdown",
)
