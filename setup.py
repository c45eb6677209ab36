from setuptools import setup, find_packages
from pathlib import Path
import sys

# Check Python version requirement
if sys.version_info < (3, 9):
    raise RuntimeError("FtpPut requires Python 3.9 or newer")

setup(
    name="FtpPut",
    version="1.0.0",
    author="Andrew Hernandez",
    author_email="andromedeyz@hotmail.com",
    description="A small blocking FTP client for logging in and uploading text files in active mode.",
    long_description=(
        open("README.md", "r", encoding="utf-8").read()
        if Path("README.md").exists()
        else "FtpPut logs in to an FTP server and pushes text files over an active mode data connection. Every command waits for its reply, every reply code is checked, and sockets are always cleaned up - with a one-line API and a small command line tool on top."
    ),
    long_description_content_type="text/markdown",
    url="http://github.com/ApaxPhoenix/FtpPut",
    project_urls={
        "Bug Tracker": "http://github.com/ApaxPhoenix/FtpPut/issues",
        "Source Code": "http://github.com/ApaxPhoenix/FtpPut",
    },
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: File Transfer Protocol (FTP)",
    ],
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        # aioftp provides a real FTP server to test the client against
        "test": [
            "pytest>=7.0",
            "aioftp>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ftpput=ftpput.__main__:main",
        ],
    },
    keywords="ftp, file transfer, upload, active mode, networking, client",
    license="MIT",
    zip_safe=False,  # Set to False for packages with data files or C extensions
    include_package_data=True,  # Include files specified in MANIFEST.in
)
