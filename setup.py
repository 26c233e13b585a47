#!/usr/bin/env python
"""
Setup script for llama-manual-runner - greedy token-by-token generation over a fixed-shape Llama model
"""

from setuptools import setup, find_packages
import os
import re

# Read the version from the llama_runner/__init__.py file
with open(os.path.join("llama_runner", "__init__.py"), "r") as f:
    version_match = re.search(r"__version__\s*=\s*['\"]([^'\"]*)['\"]", f.read())
    version = version_match.group(1) if version_match else "0.1.0"

long_description = ""
content_type = "text/markdown"
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()

# Define dependencies
install_requires = [
    "torch>=2.0.0",
    "transformers>=4.30.0",
    "numpy>=1.23.0",
    "tqdm>=4.65.0",
    "psutil>=5.9.0",
    "pyyaml>=6.0",
]

# Optional dependencies
extras_require = {
    "dev": [
        "pytest>=7.3.1",
        "pytest-cov>=4.1.0",
        "black>=23.3.0",
        "isort>=5.12.0",
    ],
}

setup(
    name="llama-manual-runner",
    version=version,
    description="Greedy token-by-token generation over a fixed-shape Llama model",
    long_description=long_description,
    long_description_content_type=content_type,
    packages=find_packages(include=["llama_runner", "llama_runner.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "llama-runner=llama_runner.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords=[
        "nlp",
        "transformers",
        "language-model",
        "text-generation",
        "llama",
    ],
)
