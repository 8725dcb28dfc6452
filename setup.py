from setuptools import find_packages, setup

setup(
    name="storagebrowser",
    version="0.1.0",
    description="Resolve paths in a remote storage tree and download files with progress output",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "urllib3",
        "PyYAML",
        "platformdirs",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "storagebrowser=storagebrowser.cli:main",
        ],
    },
)
