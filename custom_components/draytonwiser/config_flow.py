"""Config flow for the Drayton Wiser integration."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from wiserheat_lib import (
    ClientConfig,
    Station,
    WiserAuthError,
    WiserClient,
    WiserConnectionError,
    WiserError,
)
import voluptuous as vol

from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_HOST
from homeassistant.core import callback
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.device_registry import format_mac
from homeassistant.helpers.selector import selector

from .const import (
    CONF_AWAY_SETPOINT,
    CONF_BOOST_DURATION,
    CONF_REFRESH_INTERVAL,
    CONF_SECRET,
    DEFAULT_AWAY_SETPOINT,
    DEFAULT_BOOST_DURATION,
    DEFAULT_REFRESH_INTERVAL,
    DOMAIN,
    MAX_REFRESH_INTERVAL,
    MIN_REFRESH_INTERVAL,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): cv.string,
        vol.Required(CONF_SECRET): selector({"text": {"type": "password"}}),
    }
)

STEP_REAUTH_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_SECRET): selector({"text": {"type": "password"}}),
    }
)


async def async_validate_input(host: str, secret: str) -> Station:
    """Ask the hub for its identity; raises the library's errors on failure."""
    client = WiserClient(ClientConfig(host=host, secret=secret), logger=_LOGGER)
    try:
        return await client.async_get_station()
    finally:
        await client.async_stop()


def _errors_for(err: WiserError) -> dict[str, str]:
    if isinstance(err, WiserAuthError):
        return {"base": "invalid_auth"}
    if isinstance(err, WiserConnectionError):
        return {"base": "cannot_connect"}
    return {"base": "unknown"}


class WiserConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Drayton Wiser."""

    VERSION = 1
    MINOR_VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            secret = user_input[CONF_SECRET].strip()
            self._async_abort_entries_match({CONF_HOST: host})
            try:
                station = await async_validate_input(host, secret)
            except WiserError as err:
                _LOGGER.debug("Validation against %s failed: %s", host, err)
                errors = _errors_for(err)
            else:
                if station.mac_address:
                    await self.async_set_unique_id(format_mac(station.mac_address))
                    self._abort_if_unique_id_configured(updates={CONF_HOST: host})
                return self.async_create_entry(
                    title=station.hostname or host,
                    data={CONF_HOST: host, CONF_SECRET: secret},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Handle a rejected secret."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for a new secret and check it against the hub."""
        errors: dict[str, str] = {}
        entry = self._get_reauth_entry()
        if user_input is not None:
            secret = user_input[CONF_SECRET].strip()
            try:
                await async_validate_input(entry.data[CONF_HOST], secret)
            except WiserError as err:
                errors = _errors_for(err)
            else:
                return self.async_update_reload_and_abort(
                    entry, data_updates={CONF_SECRET: secret}
                )

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=STEP_REAUTH_DATA_SCHEMA,
            errors=errors,
            description_placeholders={"host": entry.data[CONF_HOST]},
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> WiserOptionsFlow:
        """Return the options flow."""
        return WiserOptionsFlow()


class WiserOptionsFlow(OptionsFlow):
    """Tune refresh cadence and command defaults."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        if user_input is not None:
            return self.async_create_entry(data=user_input)

        options = self.config_entry.options
        schema = vol.Schema(
            {
                vol.Required(
                    CONF_REFRESH_INTERVAL,
                    default=options.get(CONF_REFRESH_INTERVAL, DEFAULT_REFRESH_INTERVAL),
                ): vol.All(vol.Coerce(int), vol.Range(min=MIN_REFRESH_INTERVAL, max=MAX_REFRESH_INTERVAL)),
                vol.Required(
                    CONF_AWAY_SETPOINT,
                    default=options.get(CONF_AWAY_SETPOINT, DEFAULT_AWAY_SETPOINT),
                ): vol.All(vol.Coerce(float), vol.Range(min=-20.0, max=30.0)),
                vol.Required(
                    CONF_BOOST_DURATION,
                    default=options.get(CONF_BOOST_DURATION, DEFAULT_BOOST_DURATION),
                ): vol.All(vol.Coerce(int), vol.Range(min=1, max=1440)),
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
