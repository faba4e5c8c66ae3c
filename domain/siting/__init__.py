"""Siting Bounded Context.

Responsible for the planned radio network:
- Value Objects: BeamConfig, Antenna, BaseStation
- Ports: StationRepository
"""
