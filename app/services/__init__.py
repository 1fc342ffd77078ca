"""
Service Organization
====================

**application/**
  Singleton services managed by ServiceContainer. One instance per application.
  ActivityLogService, DeviceService, SensorDataService, DashboardService

``container.ServiceContainer`` wires them to the SQLite repositories and the
audit logger.
"""
