"""Moment Feed — Upstream Fetching & Feed Orchestration"""
