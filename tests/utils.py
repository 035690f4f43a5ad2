from sqlalchemy.future import select


async def reload(session, model, row_id):
    """Re-read a row from the database, bypassing the identity map."""
    result = await session.execute(
        select(model).where(model.id == row_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
