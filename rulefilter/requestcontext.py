"""Immutable request context carrying caller attributes."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any


class _Key:
    __slots__ = ("_label",)

    def __init__(self, label: str) -> None:
        self._label = label

    def __repr__(self) -> str:
        return f"<context key {self._label}>"


_USER_ID = _Key("user_id")
_DEVICE = _Key("device")
_IP = _Key("ip")
_VERSION = _Key("version")
_PLATFORM = _Key("platform")
_CHANNEL = _Key("channel")
_UA = _Key("ua")
_REFERER = _Key("referer")
_USER_TAG = _Key("user_tag")


class Context:
    """An immutable mapping of keys to values; ``with_value`` derives a new one."""

    __slots__ = ("_values",)

    def __init__(self) -> None:
        self._values: MappingProxyType = MappingProxyType({})

    def with_value(self, key: Any, value: Any) -> "Context":
        """Return a new context holding ``value`` under ``key``."""
        derived = Context()
        derived._values = MappingProxyType({**self._values, key: value})
        return derived

    def value(self, key: Any) -> Any:
        """Return the value stored under ``key``, or None."""
        return self._values.get(key)


def with_user_id(ctx: Context, user_id: Any) -> Context:
    return ctx.with_value(_USER_ID, user_id)


def from_user_id(ctx: Context) -> Any:
    return ctx.value(_USER_ID)


def with_device(ctx: Context, device: Any) -> Context:
    return ctx.with_value(_DEVICE, device)


def from_device(ctx: Context) -> Any:
    return ctx.value(_DEVICE)


def with_ip(ctx: Context, ip: Any) -> Context:
    return ctx.with_value(_IP, ip)


def from_ip(ctx: Context) -> Any:
    return ctx.value(_IP)


def with_version(ctx: Context, version: Any) -> Context:
    return ctx.with_value(_VERSION, version)


def from_version(ctx: Context) -> Any:
    return ctx.value(_VERSION)


def with_platform(ctx: Context, platform: Any) -> Context:
    return ctx.with_value(_PLATFORM, platform)


def from_platform(ctx: Context) -> Any:
    return ctx.value(_PLATFORM)


def with_channel(ctx: Context, channel: Any) -> Context:
    return ctx.with_value(_CHANNEL, channel)


def from_channel(ctx: Context) -> Any:
    return ctx.value(_CHANNEL)


def with_ua(ctx: Context, ua: Any) -> Context:
    return ctx.with_value(_UA, ua)


def from_ua(ctx: Context) -> Any:
    return ctx.value(_UA)


def with_referer(ctx: Context, referer: Any) -> Context:
    return ctx.with_value(_REFERER, referer)


def from_referer(ctx: Context) -> Any:
    return ctx.value(_REFERER)


def with_user_tag(ctx: Context, user_tag: Any) -> Context:
    return ctx.with_value(_USER_TAG, user_tag)


def from_user_tag(ctx: Context) -> Any:
    return ctx.value(_USER_TAG)