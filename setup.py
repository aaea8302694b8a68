from setuptools import setup, find_packages

setup(
    name="video-dashboard",
    version="0.1.0",
    packages=find_packages(include=["video_dashboard", "video_dashboard.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.25.0",
        "pydantic>=2.5.0",
        "python-dotenv>=1.0.0",
        "fastapi>=0.104.0",
        "redis>=5.0.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
)
