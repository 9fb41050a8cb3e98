"""
Scheduling engine.

``timing`` turns a delay or interval into a firing rule, ``timers``
runs firing rules on APScheduler, ``invoker`` performs the outbound
HTTP calls and ``registry`` ties the three together.
"""
