# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="codemap",
    version="1.0.0",
    description="Scan a codebase and produce a JSON knowledge map of its files, layers and dependencies",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["codemap", "codemap.*"]),
    python_requires=">=3.9",
    install_requires=[
        "google-genai>=1.0",
        "tree-sitter>=0.22",
        "tree-sitter-javascript>=0.21",
        "tree-sitter-typescript>=0.21",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'codemap=codemap.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
