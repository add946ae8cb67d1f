from setuptools import find_packages, setup

setup(
    name="sftp-shell",
    version="0.1.0",
    description="Interactive shell for browsing and transferring files on an SFTP server",
    author="Daniel T Sasser II",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "paramiko>=3.0.0",
    ],
    entry_points={
        "console_scripts": [
            "sftp-shell=sftp_shell.__main__:main",
        ],
    },
    python_requires=">=3.10",
    extras_require={
        "dev": [
            "pytest",
            "build",
            "twine",
        ],
    },
)
