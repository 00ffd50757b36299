"""
Screen time ledger: earned/spent minutes and the derived available balance
"""
__version__ = "0.1.0"
