from setuptools import setup, find_packages

setup(
    name="serverlist",
    version="0.1.0",
    description="serverlist - keeps a fleet's live hosts in one shared Skynet registry record",
    author="SkynetLabs",
    url="https://github.com/SkynetLabs/servers",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "typer>=0.16.0",
        "rich>=13.7.1",
        "python-dotenv>=1.0.1",
        "requests>=2.32.0",
        "httpx>=0.27.0",
        "cryptography>=42.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.3.2",
        ],
    },
    entry_points={
        "console_scripts": [
            "serverlist=serverlist.apps.cli.app:app",  # команда `serverlist`
        ],
    },
)
