"""Catalog of the music store reporting queries.

Every entry is a single read-only statement with no parameters. Names are
the public identifiers accepted by :meth:`reporting.ReportingQuerySet.run`.
Entries with ``alternative_of`` set answer the same question as another
entry with a different formulation and must return the same rows.
"""

from typing import Dict, List

from data_models import QueryLevel, QuerySpecModel


_CATALOG: List[QuerySpecModel] = [
    # --- Easy ---
    QuerySpecModel(
        name="senior_employee",
        level=QueryLevel.EASY,
        question="Who is the senior most employee based on job title?",
        single_row=True,
        sql="""
SELECT employee_id, first_name, last_name, title, levels
FROM employee
ORDER BY levels DESC
LIMIT 1
""",
    ),
    QuerySpecModel(
        name="invoices_by_country",
        level=QueryLevel.EASY,
        question="Which countries have the most invoices?",
        sql="""
SELECT billing_country, COUNT(*) AS invoice_count
FROM invoice
GROUP BY billing_country
ORDER BY invoice_count DESC
""",
    ),
    QuerySpecModel(
        name="top_invoice_totals",
        level=QueryLevel.EASY,
        question="What are the top 3 values of total invoice?",
        sql="""
SELECT invoice_id, total
FROM invoice
ORDER BY total DESC
LIMIT 3
""",
    ),
    QuerySpecModel(
        name="best_revenue_city",
        level=QueryLevel.EASY,
        question="Which city has the best customers? Return the city with the highest sum of invoice totals.",
        single_row=True,
        sql="""
SELECT billing_city, SUM(total) AS invoice_total
FROM invoice
GROUP BY billing_city
ORDER BY invoice_total DESC
LIMIT 1
""",
    ),
    QuerySpecModel(
        name="best_customer",
        level=QueryLevel.EASY,
        question="Who is the best customer? Return the customer who has spent the most money.",
        single_row=True,
        sql="""
SELECT c.customer_id, c.first_name, c.last_name, SUM(i.total) AS total_spending
FROM customer AS c
JOIN invoice AS i ON i.customer_id = c.customer_id
GROUP BY c.customer_id, c.first_name, c.last_name
ORDER BY total_spending DESC
LIMIT 1
""",
    ),

    # --- Moderate ---
    QuerySpecModel(
        name="rock_listeners",
        level=QueryLevel.MODERATE,
        question="Return the email, first name and last name of all Rock music listeners, ordered by email.",
        sql="""
SELECT DISTINCT c.email, c.first_name, c.last_name
FROM customer AS c
JOIN invoice AS i ON i.customer_id = c.customer_id
JOIN invoice_line AS il ON il.invoice_id = i.invoice_id
WHERE il.track_id IN (
    SELECT t.track_id
    FROM track AS t
    JOIN genre AS g ON g.genre_id = t.genre_id
    WHERE g.name = 'Rock'
)
ORDER BY c.email
""",
    ),
    QuerySpecModel(
        name="rock_listeners_with_genre",
        level=QueryLevel.MODERATE,
        question="Return the email, first name, last name and genre of all Rock music listeners, ordered by email.",
        alternative_of="rock_listeners",
        sql="""
SELECT DISTINCT c.email, c.first_name, c.last_name, g.name AS genre
FROM customer AS c
JOIN invoice AS i ON i.customer_id = c.customer_id
JOIN invoice_line AS il ON il.invoice_id = i.invoice_id
JOIN track AS t ON t.track_id = il.track_id
JOIN genre AS g ON g.genre_id = t.genre_id
WHERE g.name = 'Rock'
ORDER BY c.email
""",
    ),
    QuerySpecModel(
        name="top_rock_bands",
        level=QueryLevel.MODERATE,
        question="Which 10 artists have written the most rock music? Return the artist name and track count.",
        sql="""
SELECT ar.artist_id, ar.name, COUNT(t.track_id) AS track_count
FROM track AS t
JOIN album AS al ON al.album_id = t.album_id
JOIN artist AS ar ON ar.artist_id = al.artist_id
JOIN genre AS g ON g.genre_id = t.genre_id
WHERE g.name = 'Rock'
GROUP BY ar.artist_id, ar.name
ORDER BY track_count DESC
LIMIT 10
""",
    ),
    QuerySpecModel(
        name="above_average_tracks",
        level=QueryLevel.MODERATE,
        question="Return the tracks longer than the average track length, longest first.",
        sql="""
SELECT track_id, name, milliseconds
FROM track
WHERE milliseconds > (SELECT AVG(milliseconds) FROM track)
ORDER BY milliseconds DESC
""",
    ),

    # --- Advanced ---
    QuerySpecModel(
        name="spend_on_top_artist",
        level=QueryLevel.ADVANCED,
        question="How much has each customer spent on the best selling artist?",
        sql="""
WITH best_selling_artist AS (
    SELECT ar.artist_id, ar.name AS artist_name,
           SUM(il.unit_price * il.quantity) AS total_sales
    FROM invoice_line AS il
    JOIN track AS t ON t.track_id = il.track_id
    JOIN album AS al ON al.album_id = t.album_id
    JOIN artist AS ar ON ar.artist_id = al.artist_id
    GROUP BY ar.artist_id, ar.name
    ORDER BY total_sales DESC
    LIMIT 1
)
SELECT c.customer_id, c.first_name, c.last_name, bsa.artist_name,
       SUM(il.unit_price * il.quantity) AS amount_spent
FROM invoice AS i
JOIN customer AS c ON c.customer_id = i.customer_id
JOIN invoice_line AS il ON il.invoice_id = i.invoice_id
JOIN track AS t ON t.track_id = il.track_id
JOIN album AS al ON al.album_id = t.album_id
JOIN best_selling_artist AS bsa ON bsa.artist_id = al.artist_id
GROUP BY c.customer_id, c.first_name, c.last_name, bsa.artist_name
ORDER BY amount_spent DESC
""",
    ),
    QuerySpecModel(
        name="top_genre_per_country",
        level=QueryLevel.ADVANCED,
        question="What is the most popular music genre in each country? Countries with tied genres return all of them.",
        sql="""
WITH genre_purchases AS (
    SELECT c.country, g.genre_id, g.name AS genre,
           COUNT(il.quantity) AS purchases,
           RANK() OVER (PARTITION BY c.country ORDER BY COUNT(il.quantity) DESC) AS purchase_rank
    FROM invoice_line AS il
    JOIN invoice AS i ON i.invoice_id = il.invoice_id
    JOIN customer AS c ON c.customer_id = i.customer_id
    JOIN track AS t ON t.track_id = il.track_id
    JOIN genre AS g ON g.genre_id = t.genre_id
    GROUP BY c.country, g.genre_id, g.name
)
SELECT country, genre_id, genre, purchases
FROM genre_purchases
WHERE purchase_rank = 1
ORDER BY country, genre_id
""",
    ),
    QuerySpecModel(
        name="top_genre_per_country_by_max",
        level=QueryLevel.ADVANCED,
        question="What is the most popular music genre in each country? Countries with tied genres return all of them.",
        alternative_of="top_genre_per_country",
        sql="""
WITH genre_purchases AS (
    SELECT c.country, g.genre_id, g.name AS genre,
           COUNT(il.quantity) AS purchases
    FROM invoice_line AS il
    JOIN invoice AS i ON i.invoice_id = il.invoice_id
    JOIN customer AS c ON c.customer_id = i.customer_id
    JOIN track AS t ON t.track_id = il.track_id
    JOIN genre AS g ON g.genre_id = t.genre_id
    GROUP BY c.country, g.genre_id, g.name
),
max_genre_per_country AS (
    SELECT country, MAX(purchases) AS max_purchases
    FROM genre_purchases
    GROUP BY country
)
SELECT gp.country, gp.genre_id, gp.genre, gp.purchases
FROM genre_purchases AS gp
JOIN max_genre_per_country AS m
  ON m.country = gp.country AND gp.purchases = m.max_purchases
ORDER BY gp.country, gp.genre_id
""",
    ),
    QuerySpecModel(
        name="top_spender_per_country",
        level=QueryLevel.ADVANCED,
        question="Which customer has spent the most in each country? Countries with tied customers return all of them.",
        sql="""
WITH customer_with_country AS (
    SELECT c.customer_id, c.first_name, c.last_name, i.billing_country,
           SUM(i.total) AS total_spending,
           RANK() OVER (PARTITION BY i.billing_country ORDER BY SUM(i.total) DESC) AS spend_rank
    FROM invoice AS i
    JOIN customer AS c ON c.customer_id = i.customer_id
    GROUP BY c.customer_id, c.first_name, c.last_name, i.billing_country
)
SELECT customer_id, first_name, last_name, billing_country, total_spending
FROM customer_with_country
WHERE spend_rank = 1
ORDER BY billing_country, customer_id
""",
    ),
    QuerySpecModel(
        name="top_spender_per_country_by_max",
        level=QueryLevel.ADVANCED,
        question="Which customer has spent the most in each country? Countries with tied customers return all of them.",
        alternative_of="top_spender_per_country",
        sql="""
WITH customer_with_country AS (
    SELECT c.customer_id, c.first_name, c.last_name, i.billing_country,
           SUM(i.total) AS total_spending
    FROM invoice AS i
    JOIN customer AS c ON c.customer_id = i.customer_id
    GROUP BY c.customer_id, c.first_name, c.last_name, i.billing_country
),
country_max_spending AS (
    SELECT billing_country, MAX(total_spending) AS max_spending
    FROM customer_with_country
    GROUP BY billing_country
)
SELECT cc.customer_id, cc.first_name, cc.last_name, cc.billing_country, cc.total_spending
FROM customer_with_country AS cc
JOIN country_max_spending AS ms
  ON ms.billing_country = cc.billing_country AND cc.total_spending = ms.max_spending
ORDER BY cc.billing_country, cc.customer_id
""",
    ),
]


def build_catalog(specs: List[QuerySpecModel]) -> Dict[str, QuerySpecModel]:
    """
    Index specs by name, rejecting duplicates and dangling alternatives.
    """
    catalog: Dict[str, QuerySpecModel] = {}
    for spec in specs:
        if spec.name in catalog:
            raise ValueError(f"Duplicate query name: {spec.name}")
        catalog[spec.name] = spec
    for spec in catalog.values():
        if spec.alternative_of is not None and spec.alternative_of not in catalog:
            raise ValueError(
                f"[{spec.name}] alternative_of refers to unknown query: {spec.alternative_of}"
            )
    return catalog


QUERIES: Dict[str, QuerySpecModel] = build_catalog(_CATALOG)
