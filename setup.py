"""
Setup script para nfse_equiplano - Biblioteca para comunicação com os webservices NFSe Equiplano.
"""

from setuptools import setup
from pathlib import Path

# Lê o README para usar como long_description
readme_file = Path(__file__).parent / "README.md"
long_description = ""
if readme_file.exists():
    long_description = readme_file.read_text(encoding="utf-8")

setup(
    name="nfse-equiplano",
    version="1.0.0",
    description="Biblioteca Python para comunicação com os webservices NFSe do provedor Equiplano",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="BeSoft Tecnologia",
    author_email="contato@besoft.com.br",
    # O pacote está na pasta atual (nfse_equiplano)
    # Quando instalado, será importado como: from nfse_equiplano import NFSeEquiplano
    packages=["nfse_equiplano"],
    package_dir={"nfse_equiplano": "."},
    package_data={"nfse_equiplano": ["storage/*.json"]},
    python_requires=">=3.8",
    install_requires=[
        "lxml>=4.6.0",
        "requests>=2.25.0",
        "requests-pkcs12>=1.27",
        "cryptography>=42.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Office/Business :: Financial :: Accounting",
    ],
    keywords="nfse nota-fiscal servico equiplano soap",
    include_package_data=True,
    zip_safe=False,
)
