"""Schedules domain - work-schedule helpers and the admin schedule editor"""
