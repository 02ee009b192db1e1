"""
Example 01: Pagination

This example demonstrates fetching a page of rows with an optional total count.
When the count proves a page is empty, no row fetch is issued.
"""

from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, select

from row_shape import Pager, SQLQuery, paginate

metadata = MetaData()
users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(50), nullable=False),
)


def main():
    engine = create_engine("sqlite://", echo=False)
    metadata.create_all(engine)

    with engine.connect() as conn:
        conn.execute(users.insert(), [{"name": f"user-{i:02d}"} for i in range(1, 24)])

        statement = select(users).order_by(users.c.id)

        print("=== Pagination ===\n")

        # Page with total
        page = paginate(Pager(page_index=1, page_size=10), SQLQuery(conn, statement))
        print(f"1. Page 2 of {page.pages(10)} (total {page.total}):")
        for row in page.rows:
            print(f"   - {row.id}: {row.name}")
        print()

        # Page past the end: counted, not fetched
        page = paginate(Pager(page_index=9, page_size=10), SQLQuery(conn, statement))
        print(f"2. Page 10: {len(page.rows)} rows (total {page.total})\n")

        # Page without total
        pager = Pager.of(page_index=2, page_size=10, count=False)
        page = paginate(pager, SQLQuery(conn, select(users.c.name).order_by(users.c.id), scalars=True))
        print(f"3. Page 3 without count: {page.rows} (total {page.total})\n")

    engine.dispose()


if __name__ == "__main__":
    main()
