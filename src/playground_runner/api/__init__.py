"""HTTP surface of the runner.

- GET /: the editor runner page
- POST /: compile and render a snippet
- POST /auth/{env}: GitHub OAuth code exchange
"""
