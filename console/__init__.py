"""
Console: browser-facing view of the traffic generator dashboard

Polls the control API every couple of seconds, keeps a rolling history for
the traffic chart and serves the dashboard and configuration pages.
"""
