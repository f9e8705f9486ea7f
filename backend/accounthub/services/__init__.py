"""
Services Module

Application logic shared by HTTP routes and the WebSocket channel:
- accounts: registration, credential checks, token issuance, logout
- users: user lookup and /users filtering
"""
