"""Shift exchange domain - exchange requests and dual approval"""
