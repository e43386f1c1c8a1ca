import logging

import numpy as np
import pandas as pd

from mrmselect.exceptions import ColumnTypeError, MissingAttributeError

logger = logging.getLogger()


class Property:
    """Column of a feature table with the dtype it is cast to."""

    required = False

    def __init__(self, name, type):
        """
        Parameters
        ----------
        name: str
            Name of the column

        type: type
            dtype the column is cast to

        """
        self.name = name
        self.type = type

    def __call__(self, df: pd.DataFrame) -> bool:
        """Cast the column in place and return False if a required column is absent."""
        if self.name not in df.columns:
            return not self.required

        if df[self.name].dtype != self.type:
            try:
                df[self.name] = df[self.name].astype(self.type)
            except (TypeError, ValueError) as e:
                raise ColumnTypeError(self.name, self.type) from e
        return True


class Optional(Property):
    """Column which is cast if present."""


class Required(Property):
    """Column which must be present."""

    required = True


class Schema:
    def __init__(self, name, properties):
        """Set of columns a feature table is checked against.

        Parameters
        ----------
        name: str
            Name of the schema, used in log messages

        properties: list
            List of Property objects

        """
        self.name = name
        self.schema = properties
        for property in self.schema:
            if not isinstance(property, Property):
                raise ValueError("Schema must contain only Property objects")

    def validate(
        self,
        df: pd.DataFrame,
        warn_on_critical_values: bool = False,
    ) -> None:
        """Validates the dataframe in place, columns are cast to the type of their property.

        Parameters
        ----------
        df: pd.DataFrame
            Dataframe to validate

        warn_on_critical_values: bool
            If True, warn on NaN and Inf in the float columns of the schema. Defaults to False.

        Raises
        ------
        MissingAttributeError
            If a required column is not present.

        """
        for property in self.schema:
            if not property(df):
                logger.error(
                    f"Validation of {self.name} failed: Column {property.name} is not present in the dataframe"
                )
                raise MissingAttributeError(property.name)

        if warn_on_critical_values and len(df) > 0:
            self._warn_on_critical_values(df)

    def _warn_on_critical_values(self, df: pd.DataFrame) -> None:
        # missing metrics fail the selection only if the feature ends up in a problem
        for property in self.schema:
            if property.name not in df.columns or not pd.api.types.is_float_dtype(
                df[property.name].dtype
            ):
                continue

            values = df[property.name].to_numpy()
            for label, count in (
                ("NaNs", np.isnan(values).sum()),
                ("Infs", np.isinf(values).sum()),
            ):
                if count > 0:
                    logger.warning(
                        f"{self.name}: {property.name} has {count} {label} ({count / len(df) * 100:.2f} % of {len(df)} rows)"
                    )
