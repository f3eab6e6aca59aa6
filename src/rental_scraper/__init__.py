"""Extração de dados de anúncios de aluguel de sites imobiliários brasileiros."""

__version__ = "0.1.0"
