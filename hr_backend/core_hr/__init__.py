"""Core HR module — Employee and Team models, schemas and services."""

from hr_backend.core_hr.models import Employee, Team, team_members

__all__ = ["Employee", "Team", "team_members"]
