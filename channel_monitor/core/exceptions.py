"""
Custom exceptions for the channel monitor
"""


class ChannelMonitorError(Exception):
    """Base exception for channel monitor errors"""


class ConfigurationError(ChannelMonitorError):
    """Configuration related errors"""


class ChannelRegistrationError(ChannelMonitorError):
    """Channel registration errors (duplicate or unknown channel names)"""
