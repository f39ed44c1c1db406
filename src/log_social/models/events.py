"""
Outbound event names dispatched by the social client.
"""


class SocialEvent:
    CLIENT_STATE = "onClientState"
    USER_PROFILE = "onUserProfile"
    MESSAGE = "onMessage"
