import os
from pathlib import Path

from setuptools import setup

SOURCE_ROOT = Path(__file__).resolve().parent


def main():
    setup(
        name="apigen",
        version=detect_version(),
        description="Haskell binding generator for GObject-based C APIs",
        long_description=compute_long_description(),
        long_description_content_type="text/markdown",
        install_requires=["typing_extensions; python_version<'3.11'"],
        extras_require={"test": ["pytest"]},
        python_requires=">=3.8",
        keywords="gtk2hs gobject binding generator haskell",
        classifiers=[
            "Development Status :: 4 - Beta",
            "Environment :: Console",
            "Intended Audience :: Developers",
            "Natural Language :: English",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.8",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: Implementation :: CPython",
            "Programming Language :: Haskell",
            "Topic :: Software Development :: Code Generators",
        ],
        packages=["apigen"],
        package_data={"apigen": ["py.typed"]},
        zip_safe=False,
    )


def detect_version() -> str:
    pkg_info = SOURCE_ROOT / "PKG-INFO"
    in_source_package = pkg_info.exists()
    if in_source_package:
        version_line = [
            line for line in pkg_info.read_text(encoding="utf-8").split("\n") if line.startswith("Version: ")
        ][0].strip()
        return version_line[9:]

    version = os.environ.get("APIGEN_VERSION")
    if version is not None:
        return version

    return "0.1.0"


def compute_long_description() -> str:
    return (SOURCE_ROOT / "README.md").read_text(encoding="utf-8")


if __name__ == "__main__":
    main()
