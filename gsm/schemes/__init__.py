"""Schemes blueprint"""
from flask import Blueprint

schemes_bp = Blueprint('schemes', __name__)

from gsm.schemes import routes  # noqa: E402,F401
