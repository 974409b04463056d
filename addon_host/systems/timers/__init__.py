from .timer_scheduler import PendingTimer, TimerHandle, TimerScheduler
