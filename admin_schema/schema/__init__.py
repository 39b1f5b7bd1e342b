"""
Schema derivation package.

    provider.py             MetadataProvider interface
    sqlalchemy_provider.py  SQLAlchemy implementation
    loader.py               one-time model loading + enumeration
    builder.py              model → ModelSchema
    validators.py           declared rules → ValidatorSpec
    types.py                schema records
    constants.py            fixed tables and UI defaults
"""
