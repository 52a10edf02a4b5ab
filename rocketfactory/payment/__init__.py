"""Payments: configuration and the payment service."""