from setuptools import setup, find_packages

setup(
    name="agent-browser",
    version="0.1.0",
    description="Fast browser automation CLI backed by a long-lived daemon",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "typer>=0.12.0",
        "rich>=13.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "agent-browser=agentbrowser.main:agent_browser",
        ],
    },
    python_requires=">=3.10",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
