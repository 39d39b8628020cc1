import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="gsheetscells",
    version="0.1.0",
    description="a wrapper for Google Sheets API v4 with cell caching and batched cell updates (PYTHON)",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=("tests",)),
    python_requires=">=3.8",
    install_requires=[
        "google-api-python-client>=2.0",
        "google-auth>=2.0",
        "google-auth-httplib2>=0.1",
        "google-auth-oauthlib>=0.5",
        "httplib2>=0.19",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    classifiers=(
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ),
)
