"""Setup script for the tu-planner TISS calendar proxy."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, separating testing dependencies
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
test_requirements = []

if requirements_file.exists():
    for line in requirements_file.read_text().strip().split("\n"):
        # Skip empty lines and comments
        line = line.split("#", 1)[0].strip()
        if not line:
            continue

        if "pytest" in line or "respx" in line:
            test_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="tu-planner",
    version="0.1.0",
    description="Proxy for the TU Wien TISS personal calendar that removes excluded events",
    long_description=long_description,
    long_description_content_type="text/markdown",
    # Package configuration
    packages=find_packages(include=["tu_planner", "tu_planner.*"]),
    include_package_data=True,
    # Dependencies
    install_requires=requirements,
    extras_require={
        "test": test_requirements,
        "dev": test_requirements
        + [
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Web Environment",
        "Intended Audience :: End Users/Desktop",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Scheduling",
        "Framework :: AsyncIO",
        "Framework :: aiohttp",
    ],
    keywords="calendar ics icalendar tiss tuwien proxy aiohttp async",
    entry_points={
        "console_scripts": [
            "tu-planner=tu_planner.__main__:main",
        ],
    },
    zip_safe=False,
)
