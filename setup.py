# setup.py
from setuptools import setup, find_packages

setup(
    name="ctx-pick",
    version="0.1.0",
    description="Resolve files by name, path, directory or glob and copy them to the clipboard as LLM-ready Markdown",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "tree-sitter>=0.25",
        "tree-sitter-python>=0.23",
        "tree-sitter-rust>=0.23",
        "tree-sitter-typescript>=0.23",
        "pyperclip>=1.8",
        "tiktoken>=0.7",
    ],
    extras_require={
        "test": [
            "pytest>=7",
        ],
    },
    entry_points={
        'console_scripts': [
            'ctx-pick=ctxpick.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
