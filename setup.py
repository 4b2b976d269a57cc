from setuptools import setup, find_packages

setup(
    name="escluster",
    packages=find_packages(exclude=["*.tests.*", "tests", "*.tests", "tests.*"]),
    version="0.1.0",
    long_description_content_type="text/markdown",
    long_description=open("README_pypi.md").read(),
    description="Test harness for running integration tests against an already running Elasticsearch cluster",
    license="MIT",
    keywords=[
        "elasticsearch",
        "testing",
        "integration",
        "cluster",
    ],
    python_requires="~=3.7",
    install_requires=[
        "requests >= 2.27.1",
        "ijson ~= 3.2.3",
    ],
    extras_require={
        "test": [
            "pytest >= 7.0.0",
        ],
    },
    zip_safe=False,
)
