"""GraphQL documents sent to the availability endpoint."""

AVAILABLE_SLOTS_QUERY = """
query AvailableSlots(
  $startDate: String!
  $endDate: String!
  $appointmentTypeId: String!
  $providerId: String!
  $state: String!
  $timezone: String!
) {
  availableSlotsForRange(
    start_date: $startDate
    end_date: $endDate
    appt_type_id: $appointmentTypeId
    provider_id: $providerId
    licensed_in_state: $state
    org_level: true
    timezone: $timezone
  ) {
    user_id
    date
  }
}
"""
