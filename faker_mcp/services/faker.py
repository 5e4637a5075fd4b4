"""Faker Data Generation Service Implementation.

This module exposes the Faker library through MCP tools registered on the
shared FastMCP server. Every tool delegates the actual generation to Faker
and returns its records as JSON text.

Classes
-------
FakerService
    Service class registering the Faker tools with the MCP server

MCP Tools
---------
The service exposes the following MCP tools:
- generate_person: People with contact details
- generate_company: Companies with contact details
- generate_address: Postal addresses with coordinates
- generate_text: Words, sentences, paragraphs or free text
- generate_custom: Records built from arbitrary Faker providers
- list_locales: Locales supported by Faker

Notes
-----
All tools accept ``count``, ``locale`` and ``seed``. A seeded call gets its
own Faker instance so that the same seed always yields the same records and
never disturbs unseeded calls. Invalid arguments produce an error message
rather than an exception.

See Also
--------
faker : Fake data generation library
fastmcp : FastMCP framework for MCP server implementation
faker_mcp.validation : Argument validation
"""

from typing import Any, Callable, Dict, List, Optional

from faker import Faker
from faker.config import AVAILABLE_LOCALES
from fastmcp import FastMCP

from ..config import AppConfig, get_config
from ..exceptions import FakerMCPException, UnknownProviderError
from ..logging_config import get_logger
from ..utils import format_records
from ..validation import validate_count, validate_locale, validate_provider_name, validate_text_kind

logger = get_logger(__name__)


class FakerService:
    """Faker data generation service for MCP integration.

    Parameters
    ----------
    mcp : FastMCP
        The MCP server instance to register tools with
    config : AppConfig, optional
        Application configuration (default: global configuration)

    Attributes
    ----------
    _mcp : FastMCP
        Reference to the MCP server instance
    _fakers : Dict[str, Faker]
        Unseeded Faker instances cached per locale

    Examples
    --------
        >>> from fastmcp import FastMCP
        >>> mcp = FastMCP("Test Server")
        >>> service = FakerService(mcp)
        >>> # Tools are now registered on the server
    """

    def __init__(self, mcp: FastMCP, config: Optional[AppConfig] = None):
        """Initialize the Faker service with MCP integration."""
        self._mcp = mcp
        self._config = config or get_config()
        self._fakers: Dict[str, Faker] = {}
        self._shutdown = False
        self._register_tools()

    def _register_tools(self) -> None:
        """Register the Faker tools with the MCP server."""

        @self._mcp.tool
        async def generate_person(
            count: int = 1,
            locale: Optional[str] = None,
            seed: Optional[int] = None,
            include_address: bool = False,
        ) -> str:
            """Generate fake people.

            Parameters
            ----------
            count : int, default=1
                Number of people to generate
            locale : str, optional
                Faker locale such as "en_US" or "de_DE"
            seed : int, optional
                Seed for reproducible output
            include_address : bool, default=False
                Add a postal address to every person

            Returns
            -------
            str
                JSON array of people or an error message
            """
            return await self._generate_person_impl(count, locale, seed, include_address)

        @self._mcp.tool
        async def generate_company(count: int = 1, locale: Optional[str] = None, seed: Optional[int] = None) -> str:
            """Generate fake companies with contact details.

            Returns
            -------
            str
                JSON array of companies or an error message
            """
            return await self._generate_company_impl(count, locale, seed)

        @self._mcp.tool
        async def generate_address(count: int = 1, locale: Optional[str] = None, seed: Optional[int] = None) -> str:
            """Generate fake postal addresses with coordinates.

            Returns
            -------
            str
                JSON array of addresses or an error message
            """
            return await self._generate_address_impl(count, locale, seed)

        @self._mcp.tool
        async def generate_text(
            kind: str = "sentence",
            count: int = 1,
            locale: Optional[str] = None,
            seed: Optional[int] = None,
        ) -> str:
            """Generate fake text.

            Parameters
            ----------
            kind : str, default="sentence"
                One of "word", "sentence", "paragraph" or "text"
            count : int, default=1
                Number of items to generate

            Returns
            -------
            str
                JSON array of strings or an error message
            """
            return await self._generate_text_impl(kind, count, locale, seed)

        @self._mcp.tool
        async def generate_custom(
            fields: Dict[str, str],
            count: int = 1,
            locale: Optional[str] = None,
            seed: Optional[int] = None,
        ) -> str:
            """Generate records from arbitrary Faker providers.

            Parameters
            ----------
            fields : dict
                Mapping of output field name to Faker provider name,
                e.g. {"user": "user_name", "joined": "date_this_decade"}

            Returns
            -------
            str
                JSON array of records or an error message

            Examples
            --------
                fields = {"id": "uuid4", "email": "free_email", "ip": "ipv4"}
                result = await generate_custom(fields, count=5)
            """
            return await self._generate_custom_impl(fields, count, locale, seed)

        @self._mcp.tool
        async def list_locales() -> str:
            """List the locales Faker supports.

            Returns
            -------
            str
                JSON array of locale codes
            """
            return await self._list_locales_impl()

    def _faker(self, locale: Optional[str], seed: Optional[int]) -> Faker:
        """Return a Faker for ``locale``, fresh and seeded when ``seed`` is given."""
        locale = validate_locale(locale, self._config.faker.default_locale)
        if seed is not None:
            fake = Faker(locale)
            fake.seed_instance(seed)
            return fake
        if locale not in self._fakers:
            self._fakers[locale] = Faker(locale)
        return self._fakers[locale]

    def _generate(
        self,
        what: str,
        count: int,
        locale: Optional[str],
        seed: Optional[int],
        build: Callable[[Faker], Any],
    ) -> str:
        """Validate common arguments, build ``count`` records and format them."""
        try:
            count = validate_count(count, self._config.faker.max_count)
            fake = self._faker(locale, seed)
            records = [build(fake) for _ in range(count)]
        except FakerMCPException as e:
            logger.warning(f"Rejected {what} generation: {e.message}", extra={"error_code": e.error_code})
            return f"Error generating {what}: {e.message}"

        logger.debug(f"Generated {count} {what} record(s)", extra={"locale": locale, "seeded": seed is not None})
        return format_records(records)

    async def _generate_person_impl(
        self, count: int, locale: Optional[str], seed: Optional[int], include_address: bool
    ) -> str:
        def build(fake: Faker) -> Dict[str, Any]:
            first_name = fake.first_name()
            last_name = fake.last_name()
            person = {
                "first_name": first_name,
                "last_name": last_name,
                "name": f"{first_name} {last_name}",
                "email": fake.email(),
                "phone_number": fake.phone_number(),
                "job": fake.job(),
                "date_of_birth": fake.date_of_birth(minimum_age=18, maximum_age=90),
            }
            if include_address:
                person["address"] = fake.address()
            return person

        return self._generate("person", count, locale, seed, build)

    async def _generate_company_impl(self, count: int, locale: Optional[str], seed: Optional[int]) -> str:
        def build(fake: Faker) -> Dict[str, Any]:
            return {
                "name": fake.company(),
                "catch_phrase": fake.catch_phrase(),
                "bs": fake.bs(),
                "email": fake.company_email(),
                "phone_number": fake.phone_number(),
                "website": fake.url(),
                "address": fake.address(),
            }

        return self._generate("company", count, locale, seed, build)

    async def _generate_address_impl(self, count: int, locale: Optional[str], seed: Optional[int]) -> str:
        def build(fake: Faker) -> Dict[str, Any]:
            return {
                "street_address": fake.street_address(),
                "city": fake.city(),
                "postcode": fake.postcode(),
                "country": fake.country(),
                "latitude": fake.latitude(),
                "longitude": fake.longitude(),
            }

        return self._generate("address", count, locale, seed, build)

    async def _generate_text_impl(self, kind: str, count: int, locale: Optional[str], seed: Optional[int]) -> str:
        try:
            kind = validate_text_kind(kind)
        except FakerMCPException as e:
            return f"Error generating text: {e.message}"

        return self._generate("text", count, locale, seed, lambda fake: getattr(fake, kind)())

    async def _generate_custom_impl(
        self, fields: Dict[str, str], count: int, locale: Optional[str], seed: Optional[int]
    ) -> str:
        """Build records from a field name to provider name mapping.

        Provider names are checked against the Faker instance for the
        requested locale before anything is generated, so a bad name fails
        the whole call instead of producing partial records.
        """
        try:
            if not isinstance(fields, dict) or not fields:
                raise UnknownProviderError("Fields must be a non-empty mapping of field name to provider")
            count = validate_count(count, self._config.faker.max_count)
            fake = self._faker(locale, seed)
            providers = {key: self._resolve_provider(fake, name) for key, name in fields.items()}
            records = [{key: provider() for key, provider in providers.items()} for _ in range(count)]
        except FakerMCPException as e:
            logger.warning(f"Rejected custom generation: {e.message}", extra={"error_code": e.error_code})
            return f"Error generating custom records: {e.message}"
        except Exception as e:
            # Providers needing arguments or optional packages fail when called
            logger.warning(f"Custom generation failed: {e}", extra={"error_type": type(e).__name__})
            return f"Error generating custom records: {str(e)}"

        return format_records(records)

    @staticmethod
    def _resolve_provider(fake: Faker, name: str) -> Callable[[], Any]:
        name = validate_provider_name(name)
        try:
            provider = getattr(fake, name)
        except AttributeError as e:
            raise UnknownProviderError(f"Unknown Faker provider '{name}'", details={"provider": name}, cause=e) from e
        if not callable(provider):
            raise UnknownProviderError(f"'{name}' is not a Faker data provider", details={"provider": name})
        return provider

    async def _list_locales_impl(self) -> str:
        return format_records(sorted(AVAILABLE_LOCALES))

    async def shutdown(self) -> None:
        """Release cached Faker instances.

        Called once by the shutdown sequence after all sessions are closed.
        """
        if self._shutdown:
            return
        self._fakers.clear()
        self._shutdown = True
        logger.info("Faker service shut down")

    @property
    def mcp(self) -> FastMCP:
        """The MCP server instance used by this service."""
        return self._mcp
