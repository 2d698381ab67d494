from setuptools import find_packages, setup

setup(
    name="minimal_web_server",
    version="0.0.1",
    description="A minimal HTTP/1.0 GET/HEAD static file server on asyncio streams",
    author="Blaž Škufca",
    author_email="3877198+blazskufca@users.noreply.github.com",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "minimal-web-server=minimal_web_server.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
)
