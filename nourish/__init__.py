"""
Nourish

Keeps friendships healthy: health decays a little every day without contact
and recovers when interactions are logged.
"""

__version__ = "0.1.0"
