"""
Control API: the dashboard's window onto the traffic generator

The traffic generator runs out of band; this package only mirrors its state.
Responsibilities:
- Read/edit applications.txt and interfaces.txt (ConfigStore)
- Surface stats.json and the tail of traffic.log (TelemetrySource)
- Report whether the generator is running (LivenessProbe)
- Expose all of the above over HTTP (FastAPI routers in control.api)
"""
