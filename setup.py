from setuptools import setup, find_packages
from pathlib import Path

# Read the requirements from requirements.txt
reqs_path = Path(__file__).parent / "requirements.txt"
requirements = [
    line.strip()
    for line in reqs_path.read_text().splitlines()
    if line.strip() and not line.startswith("#")
]

setup(
    name="licheck",
    version="0.1.0",
    description="Check and update copyright/license headers in source trees",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["licheck=licheck.cli:main"]},
)
