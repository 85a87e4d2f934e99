"""Product Service middleware"""
