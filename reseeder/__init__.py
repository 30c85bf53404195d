# I2P reseed server bootstrap

from reseeder.common.models import ListenerMode, ListenerPlan, ReseedOptions
from reseeder.server.bootstrap import Bootstrapper
from reseeder.server.planner import plan_mode

__all__ = [
    "Bootstrapper",
    "ListenerMode",
    "ListenerPlan",
    "ReseedOptions",
    "plan_mode",
]
