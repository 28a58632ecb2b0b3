"""
Sales app: checkout pricing, settlement and receipts.
"""
