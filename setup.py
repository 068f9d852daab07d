from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="faucet-server",
    version="0.1.0",
    description="Testnet ETH faucet server and client",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "aiohttp",
        "anyio>=4",
        "certifi",
        "eth-account>=0.13",
        "eth-typing",
        "fastapi",
        "httpx",
        "hypercorn",
        "pydantic>=2",
        "pydantic-settings>=2",
        "pyyaml",
        "rlp",
        "tenacity>=8.2",
        "typing_extensions",
        "web3>=7",
        "websockets",
    ],
    extras_require={
        "test": [
            "pytest",
            "web3[tester]>=7",
        ],
    },
    entry_points={
        "console_scripts": [
            "faucet-server=faucet_server.run:run",
            "faucet-request=faucet_server.client.cli:main",
        ],
    },
)
