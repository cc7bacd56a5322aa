"""
Folio — вычислительное ядро документов-таблиц с точной арифметикой.
"""

__version__ = "0.1.0"
