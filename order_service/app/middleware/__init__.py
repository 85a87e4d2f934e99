"""Order Service middleware"""
