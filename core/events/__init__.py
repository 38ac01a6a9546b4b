from core.events.domain_events import DomainEvents, domain_events
from core.events.signal import Signal

__all__ = ["Signal", "DomainEvents", "domain_events"]
