music_store_notes = [
    "Each 'invoice' is linked to one 'customer' via 'invoice.customer_id'.",
    "Each 'invoice_line' is linked to its 'invoice' via 'invoice_line.invoice_id'.",
    "Each 'invoice_line' is linked to a 'track' (sold item) via 'track_id'.",
    "A 'track' belongs to an 'album' ('track.album_id'), and to a 'genre' ('track.genre_id').",
    "An 'album' belongs to an 'artist' via 'album.artist_id'.",
    "'employee.reports_to' is a foreign key to 'employee.employee_id' (the manager).",
    "'employee.levels' holds the seniority level as text, e.g. 'L1' to 'L7'.",
    "'invoice.billing_country' and 'invoice.billing_city' are recorded per invoice and may differ from 'customer.country'.",
    "'invoice.total' equals the sum of 'invoice_line.unit_price * invoice_line.quantity' over its lines.",
    "'track.milliseconds' is the track duration.",
]


# Tables and columns the query catalog reads. Other columns may exist.
required_schema = {
    "employee": ["employee_id", "first_name", "last_name", "title", "levels", "reports_to"],
    "customer": ["customer_id", "first_name", "last_name", "email", "country"],
    "invoice": ["invoice_id", "customer_id", "billing_city", "billing_country", "total"],
    "invoice_line": ["invoice_line_id", "invoice_id", "track_id", "unit_price", "quantity"],
    "track": ["track_id", "name", "album_id", "genre_id", "milliseconds"],
    "album": ["album_id", "title", "artist_id"],
    "artist": ["artist_id", "name"],
    "genre": ["genre_id", "name"],
}
