# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from supply_tracker.config import Settings, get_settings
from supply_tracker.events.bus import get_event_bus
from supply_tracker.clients.http import AsyncHttpClient
from supply_tracker.clients.solana import SolanaRpcClient
from supply_tracker.notifications.notification_manager import NotificationService
from supply_tracker.notifications.strategies.base import BaseNotificationStrategy
from supply_tracker.notifications.strategies.console import ConsoleNotifier
from supply_tracker.notifications.strategies.telegram import TelegramNotifier
from supply_tracker.notifications.stylers.notification_styler import SupplyNotificationStyler
from supply_tracker.persistence.repositories.in_memory import InMemoryTrackerRepository
from supply_tracker.persistence.snapshot_store import FileSnapshotStore
from supply_tracker.services.access import SettingsRoleProvider
from supply_tracker.services.aggregation import BalanceAggregator
from supply_tracker.services.detection import ChangeDetector
from supply_tracker.services.expiry import ExpirySweeper
from supply_tracker.services.persistence import PersistenceManager
from supply_tracker.services.registry import TrackerRegistry
from supply_tracker.services.retry import RetryExecutor
from supply_tracker.services.scheduler import PollingScheduler
from supply_tracker.services.tracking import SupplyTrackingRunner, SupplyTrackingService


def _build_retry_executor(settings: Settings) -> RetryExecutor:
    """Build the lookup retry policy from settings.tracker."""
    tr = settings.tracker
    return RetryExecutor(
        max_retries=tr.retry_max_retries,
        initial_delay=tr.retry_initial_delay_seconds,
        timeout_seconds=tr.call_timeout_seconds,
    )


def _build_snapshot_store(settings: Settings) -> FileSnapshotStore:
    return FileSnapshotStore(settings.tracker.snapshot_path)


def _build_notification_notifiers(
    settings: Settings,
    styler: SupplyNotificationStyler,
) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings, styler=styler))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings, styler=styler))
    return notifiers


def _build_notification_service(
    settings: Settings,
    notifiers: list[BaseNotificationStrategy],
) -> NotificationService:
    return NotificationService(
        notifiers=notifiers,
        send_timeout=settings.tracker.call_timeout_seconds,
    )


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, RPC client, registry, scheduler and global jobs."""

    config = providers.Callable(get_settings)

    event_bus = providers.Callable(get_event_bus)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    balance_client = providers.Singleton(
        SolanaRpcClient,
        http_client=http_client,
        settings=config,
    )

    notification_styler = providers.Singleton(SupplyNotificationStyler)

    notification_service = providers.Singleton(
        _build_notification_service,
        config,
        providers.Callable(_build_notification_notifiers, config, notification_styler),
    )

    retry_executor = providers.Singleton(_build_retry_executor, config)

    tracker_repository = providers.Singleton(InMemoryTrackerRepository)

    snapshot_store = providers.Singleton(_build_snapshot_store, config)

    role_provider = providers.Singleton(SettingsRoleProvider, settings=config)

    tracker_registry = providers.Singleton(
        TrackerRegistry,
        repository=tracker_repository,
        role_provider=role_provider,
        settings=config,
    )

    balance_aggregator = providers.Singleton(
        BalanceAggregator,
        balance_client=balance_client,
        retry_executor=retry_executor,
    )

    change_detector = providers.Singleton(
        ChangeDetector,
        notification_service=notification_service,
        event_bus=event_bus,
    )

    polling_scheduler = providers.Singleton(
        PollingScheduler,
        registry=tracker_registry,
        aggregator=balance_aggregator,
        detector=change_detector,
        notification_service=notification_service,
        settings=config,
    )

    persistence_manager = providers.Singleton(
        PersistenceManager,
        registry=tracker_registry,
        scheduler=polling_scheduler,
        store=snapshot_store,
        settings=config,
        event_bus=event_bus,
    )

    expiry_sweeper = providers.Singleton(
        ExpirySweeper,
        registry=tracker_registry,
        scheduler=polling_scheduler,
        notification_service=notification_service,
        settings=config,
        event_bus=event_bus,
    )

    supply_tracking_service = providers.Singleton(
        SupplyTrackingService,
        registry=tracker_registry,
        scheduler=polling_scheduler,
        settings=config,
        event_bus=event_bus,
    )

    tracking_runner = providers.Singleton(
        SupplyTrackingRunner,
        persistence_manager=persistence_manager,
        expiry_sweeper=expiry_sweeper,
        scheduler=polling_scheduler,
        settings=config,
    )
