"""Outbound HTTP collaborators: Dashbot analytics and Twilio delivery."""

from rosa.providers.dashbot import DashbotClient
from rosa.providers.twilio import DeliveryError, TwilioClient

__all__ = ["DashbotClient", "DeliveryError", "TwilioClient"]
