from setuptools import setup, find_packages

setup(
    name="ChromaCore",
    version="0.1.0",
    description="Color transform matrices, gamut mapping and LUT resampling for VFX pipelines",
    packages=find_packages(include=["ChromaCore", "ChromaCore.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "colour-science>=0.4.4",
        "numpy>=1.24.0",
        "tqdm>=4.67.0",
    ],  # Core dependencies
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
