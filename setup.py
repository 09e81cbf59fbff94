from setuptools import setup, find_packages

setup(
    name="fairdice",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["numpy>=1.20", "rich>=12.0"],
    extras_require={"test": ["pytest>=7.0"]},
    entry_points={"console_scripts": ["fairdice=fairdice.cli:main"]},
    python_requires=">=3.10",  # structural pattern matching
)
