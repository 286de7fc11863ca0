"""Business services. Each service wraps one session and owns its commits."""
