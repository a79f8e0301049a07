"""Cashew shipment inspection: bills, containers and cutting tests."""
